"""Colored one-line messages for the terminal."""
import click


def info(text, color=None):
    click.secho(text, fg="green", color=color)


def warn(text, color=None):
    click.secho(text, fg="yellow", color=color)


def err(text, color=None):
    click.secho(text, fg="red", err=True, color=color)
