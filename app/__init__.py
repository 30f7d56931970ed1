"""
GINFO application package.

  app/models.py      : plain value objects (config, catalog entries, cards, details).
  app/url_builder.py : URL escaping and joining shared by every service.
  app/services/      : business logic: catalog, images, cards, details, view state.

``GameViewer`` (in ``ginfo.py``) is the integration point: it creates the
content clients and service instances in ``__init__`` and exposes them as
public attributes (e.g. ``viewer.resolver``).  Route handlers in
``ginfo_gui.py`` go through the viewer so all state changes happen under its
lock.
"""
