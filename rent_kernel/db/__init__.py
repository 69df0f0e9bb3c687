"""Database layer: declarative base, column types, engine management."""
