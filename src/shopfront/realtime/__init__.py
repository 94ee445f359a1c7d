"""Real-time support chat — a broadcast hub behind one WebSocket route.

Learn: Messages flow client → /ws → BroadcastHub → every open connection.
Nothing is stored; a client that connects late only sees what is sent
after it joined.
"""
