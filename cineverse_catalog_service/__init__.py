"""CineVerse catalog service: movies/anime catalog, watchlists and admin CRUD."""

__version__ = "1.0.0"
