"""Adapters layer - Portsの実装（REST API・認証情報）"""
