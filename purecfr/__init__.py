"""Poker game definitions, betting rules, notation, abstractions, betting trees and entry storage for Pure CFR."""

__version__ = "0.1.0"