def test_dispatcher_imports():
    """Verify all dispatcher submodules can be imported without errors."""
    import dispatcher.bindings
    import dispatcher.cli
    import dispatcher.core.config
    import dispatcher.core.logging
    import dispatcher.detector
    import dispatcher.executor
    import dispatcher.orchestrator

    assert dispatcher.orchestrator.dispatch is not None
