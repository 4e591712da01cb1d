"""graph-docs: documentation generators for a Cypher graph database."""
