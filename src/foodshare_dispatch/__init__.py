"""FoodShare delivery routing and status engine."""
