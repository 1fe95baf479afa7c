"""Layered service toolkit: entities, SQL and Redis repositories, Kafka-style messaging, use cases, bearer-token auth, PDF invoices and a Flask HTTP API."""

__version__ = "0.1.0"