"""Useful tasks for use when developing Finboard.

This uses the `Invoke` library."""
from pathlib import Path

from invoke import Context, Exit, task

PROJECT_DIR = Path(__file__).parent


@task
def redis(c: Context, command="up"):
    """Start or stop a local redis for the dashboard state cache"""
    if command == "up":
        c.run("docker run -d --rm --name finboard-redis -p 6379:6379 redis:7")
    elif command == "down":
        c.run("docker stop finboard-redis")
    else:
        raise Exit(f"Unknown redis command: {command}", -1)


@task
def serve(c: Context, port=8000):
    """Run the development server"""
    c.run(f"python manage.py runserver 0.0.0.0:{port}", pty=True)


@task
def refresh(c: Context, once=False):
    """Keep widget data fresh on each widget's refresh interval"""
    extra = " --once" if once else ""
    c.run(f"python manage.py refresh_widgets{extra}", pty=True)


@task
def test(c: Context, path="finboard", keyword=None):
    """Run the test suite"""
    cmd = f"pytest {path}"
    if keyword:
        cmd += f" -k {keyword}"
    with c.cd(PROJECT_DIR):
        c.run(cmd, pty=True)
