"""Built-in CLI sub-commands for structdoc.

* :mod:`~structdoc.commands.build` -- transform a document and print the
  serialized documentation model.
* :mod:`~structdoc.commands.inspect` -- summarise sections, endpoints and
  document info as tables.
* :mod:`~structdoc.commands.config` -- show and initialise the config file.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for ``build``).
"""
