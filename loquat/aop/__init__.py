"""Aspects, a proxy and a manager for running hooks around operations."""