"""GraphQL documents sent to the reporting service."""

FETCH_RUN_REPORT = """
query FetchRunReport($owner: String!, $name: String!, $runId: String!) {
  repository(owner: $owner, name: $name) {
    run(id: $runId) {
      id
      status
      url
      results {
        time
        benchmark {
          name
          uri
        }
      }
    }
  }
}
"""

GET_LATEST_FINISHED_RUN = """
query GetLatestFinishedRun($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    runs(limit: 1, status: COMPLETED) {
      id
      date
      status
    }
  }
}
"""
