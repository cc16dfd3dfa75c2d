from .pricing import calculate_final_price, money

__all__ = [
    "calculate_final_price",
    "money",
]
