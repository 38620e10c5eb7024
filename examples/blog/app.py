"""Blog demo: controllers discovered from ./controllers.

Run with::

    python app.py            # chirp dev server
    warble routes .          # list the synthesized routes
    warble serve .           # production server (reads warble.yaml)
"""

from chirp import App, AppConfig
from chirp.middleware.sessions import SessionConfig, SessionMiddleware

import warble

app = App(config=AppConfig(template_dir="templates"))
app.add_middleware(SessionMiddleware(SessionConfig(secret_key="blog-demo-secret")))
warble.load(app, controller_path="./controllers")

if __name__ == "__main__":
    app.run()
