"""Route serializers."""
