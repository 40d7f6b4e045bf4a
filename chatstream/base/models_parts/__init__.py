"""DTO implementations; import from ``chatstream.base.models`` instead."""
