"""Collaborator contracts consumed by the similarity pipeline."""
