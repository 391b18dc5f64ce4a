"""Built-in CLI sub-commands for gitlab_client.

* :mod:`~gitlab_client.commands.init` -- create a profile for a GitLab server.
* :mod:`~gitlab_client.commands.auth` -- log in, show the session, log out.
* :mod:`~gitlab_client.commands.groups` -- list groups and their members.
* :mod:`~gitlab_client.commands.route` -- show how a host would be reached.
* :mod:`~gitlab_client.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application or a plain
callback registered directly on the root app (``init``).
"""
