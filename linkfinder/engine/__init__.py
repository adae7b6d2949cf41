"""Hybrid keyword and semantic ranking engine for internal link suggestions."""
