"""JSON web API for the simulator engines.

This package provides a Flask application that exposes every engine
over HTTP for a browser front end.  It is an **optional** extra;
install with::

    pip install os-sim[web]

The ``create_app`` factory in ``app.py`` builds the app; see its module
docstring for the endpoints.
"""
