# cinema_api/cli/__init__.py
