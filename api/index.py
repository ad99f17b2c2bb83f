"""
Vercel Serverless Entry Point

Vercel's Python runtime imports this module for every request to /api/*
and serves the WSGI object named 'app'. Routing is done by the blueprints
in after8/api/.
"""

from after8 import create_app

app = create_app()
