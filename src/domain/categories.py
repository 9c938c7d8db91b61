"""
Fixed option lists shared by the directory and the blog.

Values are what gets stored; labels and icons are for display only.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryOption:
    value: str
    label: str
    icon: str = ""


LISTING_CATEGORIES: tuple[CategoryOption, ...] = (
    CategoryOption("rooms-for-rent", "Rooms for Rent", "🏠"),
    CategoryOption("car-for-rent", "Car for Rent", "🚗"),
    CategoryOption("restaurants", "Restaurants", "🍽️"),
    CategoryOption("real-estate", "Real Estate", "🏢"),
    CategoryOption("doctors-clinics", "Doctors & Clinics", "🏥"),
    CategoryOption("services", "Services", "🔧"),
    CategoryOption("education-centers", "Education Centers", "🎓"),
    CategoryOption("skills-academy", "Skills Academy", "📚"),
)

PRICE_RANGES: tuple[CategoryOption, ...] = (
    CategoryOption("$", "$ - Budget Friendly"),
    CategoryOption("$$", "$$ - Moderate"),
    CategoryOption("$$$", "$$$ - Premium"),
    CategoryOption("$$$$", "$$$$ - Luxury"),
)

BLOG_CATEGORIES: tuple[str, ...] = (
    "Local SEO",
    "Google Maps Ranking",
    "Link Building",
    "Citation Building",
    "GMB Optimization",
    "SEO Strategy",
    "Case Studies",
    "SEO Tips",
    "Industry News",
)

# Sentinel accepted by category filters to mean "no filter".
ALL = "all"


def get_listing_category(value: str) -> CategoryOption | None:
    return next((c for c in LISTING_CATEGORIES if c.value == value), None)


def is_listing_category(value: str) -> bool:
    return get_listing_category(value) is not None


def is_price_range(value: str) -> bool:
    return any(p.value == value for p in PRICE_RANGES)


def is_blog_category(value: str) -> bool:
    return value in BLOG_CATEGORIES
