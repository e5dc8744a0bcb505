"""Persistence layer: in-memory and PostgreSQL repositories"""
