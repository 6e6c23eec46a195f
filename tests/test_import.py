"""Test that the package imports correctly."""


def test_import():
    """Test basic imports."""
    import revview
    assert revview.__version__


def test_import_cli():
    """Test CLI imports."""
    from revview import cli
    assert cli
    assert set(cli.commands) == {'open', 'history'}


def test_import_core():
    """Test resolver, registry and option model imports."""
    from revview import (
        FileHistoryOptions,
        LogOptions,
        Registry,
        find_toplevel,
        parse_revs,
    )
    assert FileHistoryOptions
    assert LogOptions
    assert Registry
    assert find_toplevel
    assert parse_revs


def test_import_entry_points():
    """Test command entry point imports."""
    from revview import diffview_open, file_history, run_command
    assert diffview_open
    assert file_history
    assert run_command
