"""Use-case level logic.

These modules turn scenario definitions and already-fetched Xero rows into
query strings, aggregated rows and tables/CSV. Apart from
`scenario_runner`, which drives the integrations, they should be:
- deterministic
- unit-testable
- free of web/framework code
"""
