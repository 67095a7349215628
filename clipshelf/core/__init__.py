"""Core clipboard data management"""
