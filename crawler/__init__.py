"""Crawl engine for downloading a novel, its chapters and their images."""
