"""Warble: convention-routed MVC controllers for Chirp.

Point Warble at a directory of controllers and every public action becomes a
route, with its verb, path, and parameters inferred from its name and
signature.

Quick start::

    # controllers/userController.py
    class UserController:
        def index(self):
            return self.render({"users": []})       # GET /user

        def get_profile(self, user_id):
            return self.render({"id": user_id})     # GET /user/profile/:user_id

        def post(self):
            return self.redirect("/user")            # POST /user

    controller = UserController

    # app.py
    import warble

    app = warble.load()            # controllers/ next to app.py
    app.run()

Part of the Bengal ecosystem:

    warble      MVC controllers    (routes by convention)
    chirp       Web framework      (serves HTML)
    pounce      ASGI server        (serves apps)
    kida        Template engine    (renders HTML)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigError",
    "ControllerError",
    "ControllerRouter",
    "DispatchContext",
    "WarbleConfig",
    "WarbleError",
    "__version__",
    "load",
    "params",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warble`` fast; Chirp is only imported on first use.
    """
    if name == "load":
        from warble.app import load

        return load

    if name == "serve":
        from warble.app import serve

        return serve

    if name == "WarbleConfig":
        from warble.config import WarbleConfig

        return WarbleConfig

    if name == "params":
        from warble.controllers.params import params

        return params

    if name == "ControllerRouter":
        from warble.routes.router import ControllerRouter

        return ControllerRouter

    if name == "DispatchContext":
        from warble.routes.context import DispatchContext

        return DispatchContext

    if name in ("WarbleError", "ConfigError", "ControllerError"):
        from warble import _errors

        return getattr(_errors, name)

    msg = f"module 'warble' has no attribute {name!r}"
    raise AttributeError(msg)
