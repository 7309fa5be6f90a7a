"""Operating-systems lab exercises: page maps, a heap allocator, threads, queues and sockets."""

__version__ = "0.1.0"