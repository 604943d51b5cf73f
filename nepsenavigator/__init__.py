"""NEPSE market data: alert texts, number and date wording, a GraphQL client, an issue store and query resolvers."""

__version__ = "0.1.0"