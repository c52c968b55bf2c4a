"""Ports: abstract interfaces the services depend on."""
