"""Contact form: GET /contact shows it, POST /contact stores the name in the session."""

from chirp.middleware.sessions import get_session


def index(ctx):
    return ctx.render({"title": "Contact"})


async def post(ctx):
    form = await ctx.request.form()
    name = form.get("name", "").strip()
    if not name:
        return ctx.render("index", {"title": "Contact", "error": "Please tell us your name."})
    get_session()["contact_name"] = name
    return ctx.redirect("/contact/thanks")


def get_thanks(ctx):
    return ctx.render({"title": "Thanks"})
