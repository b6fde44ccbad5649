"""Web interface of the Guahh Auth host: REST endpoints, Socket.IO and UI helpers."""
