"""Command line interface for notion-native."""
