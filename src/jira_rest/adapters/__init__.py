"""
Adapters - Concrete implementations of the ports.

- http: RequestsTransport
- config: EnvironmentConfigProvider, DictConfigProvider
- jira: JiraClient and endpoint services
"""
