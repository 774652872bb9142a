"""storykeeper: derived-data cache and publication-state coordinator for serialized fiction."""
