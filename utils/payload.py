def with_aliases(data, aliases: dict) -> dict:
    """Copy request data, filling snake_case keys from their camelCase aliases.

    with_aliases({"askBot": True}, {"ask_bot": "askBot"}) -> {"askBot": True, "ask_bot": True}
    """
    out = dict(data.items()) if hasattr(data, "items") else {}
    for key, alias in aliases.items():
        if key not in out and alias in out:
            out[key] = out[alias]
    return out
