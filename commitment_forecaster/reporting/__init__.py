"""
Reporting: terminal formatters and file exports for CLI commands.

Modules
-------
formatters : format_currency(), format_consumption(), format_projection_summary(),
             format_velocity(): plain strings for ``typer.echo()``.
export     : flatten_trajectory() + export_to_csv() / export_to_json().
"""
