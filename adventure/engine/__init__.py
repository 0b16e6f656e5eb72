"""
Deterministic rules engine.

Everything in this package is synchronous and pure with respect to its
inputs: the same GameState and action text always produce the same
TurnResult. The only entry point a caller needs is TurnProcessor:

    >>> config = WorldLoader().load_world("village")
    >>> processor = TurnProcessor(config)
    >>> state = create_initial_state(config)
    >>> result = processor.resolve_turn(state, "Begin")
"""
