"""Fuzzy scoring, case-insensitive comparison and filtering of completion items."""