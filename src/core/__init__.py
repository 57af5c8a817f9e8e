"""Core components: notification capability and transition engine"""
