"""YAML table profiles (column schema + codec properties)."""
