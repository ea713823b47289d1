"""HTTP surface for ScamShield."""
