"""Example programs built on the actor framework: echo, ping-pong, sort and calculator."""