"""Adapter interface, configuration, status, factories, state tracking and echo and console adapters."""