"""
Renderer Dependencies for FastAPI Routes

FastAPI dependency that hands route handlers the application's Pug
renderer, so handlers never import a module-level instance.
"""

from fastapi import Request

from fastapi_pug.templating import Pug


def get_pug(request: Request) -> Pug:
    """
    Dependency returning the Pug instance installed on the application.

    Usage in routes:
        @app.get("/profile")
        async def profile(pug: Pug = Depends(get_pug)):
            return pug.TemplateResponse("users/profile", {"name": "Ada"})

    Raises:
        RuntimeError: If Pug.install(app) was never called
    """
    pug = getattr(request.app.state, "pug", None)
    if pug is None:
        raise RuntimeError("Pug renderer is not installed; call Pug(...).install(app)")
    return pug
