"""
Application Layer

FastAPI bridge exposing the session controller to the host editor and the
display panel.
"""
