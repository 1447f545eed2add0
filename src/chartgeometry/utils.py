from math import gcd


def format_number(num: float) -> str:
    """Compact tick/label text: 1.2K, 3.4M, 5.6B."""
    if abs(num) >= 1e9:
        return f"{num / 1e9:.1f}B"
    if abs(num) >= 1e6:
        return f"{num / 1e6:.1f}M"
    if abs(num) >= 1e3:
        return f"{num / 1e3:.1f}K"
    return f"{num:.1f}"

def aspect_ratio(width: int, height: int) -> str:
    """Reduced aspect ratio string, e.g. 1920x1080 -> '16/9'."""
    divisor = gcd(width, height)
    if divisor == 0:
        raise ValueError("Aspect ratio of a zero-sized area is undefined.")
    return f"{width // divisor}/{height // divisor}"

def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)
