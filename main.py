import argparse

import uvicorn

# service name -> (app factory, default port)
SERVICES = {
    "gateway": ("services.gateway.main:create_app", 4000),
    "menu": ("services.menu_service.main:create_app", 3002),
    "orders": ("services.order_service.main:create_app", 3003),
}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run one pizzeria service")
    parser.add_argument("service", choices=sorted(SERVICES))
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args(argv)

    factory, default_port = SERVICES[args.service]
    uvicorn.run(
        factory,
        factory=True,
        host=args.host,
        port=args.port or default_port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
