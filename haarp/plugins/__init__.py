"""Plugins that map URLs to cache entries, and a registry to look them up by site name."""