"""Smoke tests — verify all core and gui modules import without error."""


def test_core_modules_import():
    import core.config
    import core.engine
    import core.errors
    import core.headers
    import core.io
    import core.models
    import core.output
    import core.parsing
    import core.state
    import core.transform
    import core.writer


def test_gui_module_imports():
    import gui.app
    import gui.ui_build
    import gui.mixins
