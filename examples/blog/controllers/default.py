"""Site root: GET / and GET /about."""


def index(ctx):
    return ctx.render({"title": "Home"})


def get_about(ctx):
    return ctx.render({"title": "About"})
