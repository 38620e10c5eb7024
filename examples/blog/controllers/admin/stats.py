"""Nested controller: mounted at /admin/stats, views under templates/admin/stats/."""

VISITS = {"count": 0}


def index(ctx):
    ctx.VISITS["count"] += 1
    return ctx.render({"visits": ctx.VISITS["count"]})

