"""
CLI Commands Package

Developer commands shipped with the renderer:

- make_pug.py: make:pug - scaffold a new Pug view in resources/views

Commands are registered on the Typer application in fastapi_pug/cli.py.
"""
