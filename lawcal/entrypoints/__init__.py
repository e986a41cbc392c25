"""Entrypoints - 依存の組み立てとCLI"""
