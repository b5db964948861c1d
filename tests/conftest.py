import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from pizzaria.config.settings import carregar_settings
from pizzaria.core.context import AppContext

BACKEND_URL = "http://backend.test"
TOKEN = "token-de-teste"


def _agora(offset_segundos: int = 0) -> str:
    return (datetime(2026, 1, 10, 19, 0, tzinfo=timezone.utc) + timedelta(seconds=offset_segundos)).isoformat()


class FakeBackend:
    """
    Backend REST em memória servido via ASGI.

    `forcar(metodo, caminho, status, corpo)` faz uma rota responder sempre o
    mesmo status/corpo; `requisicoes` guarda o que chegou.
    """

    def __init__(self):
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.products: List[Dict[str, Any]] = [
            {"id": "p1", "name": "Pizza Calabresa", "price": 4500, "description": "", "banner": None,
             "disabled": False, "category_id": "c1"},
            {"id": "p2", "name": "Refrigerante", "price": 800, "description": "Lata", "banner": None,
             "disabled": False, "category_id": "c2"},
        ]
        self.categories: List[Dict[str, Any]] = [
            {"id": "c1", "name": "Pizzas"},
            {"id": "c2", "name": "Bebidas"},
        ]
        self.users = {TOKEN: {"id": 1, "name": "Ana", "email": "ana@pizzaria.com", "role": 1}}
        self.caixa_status: Optional[Dict[str, Any]] = None
        self.recebimentos: List[Dict[str, Any]] = []
        self.requisicoes: List[Dict[str, Any]] = []
        self._forcadas: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self._ids = itertools.count(1)
        self._item_ids = itertools.count(1)
        self.app = self._criar_app()

    # ------------------------------------------------------------------ #
    def forcar(self, metodo: str, caminho: str, status_code: int, corpo: Any = None) -> None:
        self._forcadas[(metodo.upper(), caminho)] = (status_code, corpo)

    def liberar(self, metodo: str, caminho: str) -> None:
        self._forcadas.pop((metodo.upper(), caminho), None)

    def adicionar_pedido(self, **campos) -> Dict[str, Any]:
        order_id = campos.pop("id", None) or f"o{next(self._ids)}"
        pedido = {
            "id": order_id,
            "table": None,
            "name": None,
            "phone": None,
            "comanda": None,
            "orderType": "BALCAO",
            "status": False,
            "draft": True,
            "viewed": False,
            "createdAt": _agora(),
            "items": [],
        }
        pedido.update(campos)
        self.orders[order_id] = pedido
        return pedido

    def adicionar_item(self, order_id: str, product_id: str, amount: int) -> Dict[str, Any]:
        produto = next(p for p in self.products if p["id"] == product_id)
        item = {
            "id": f"i{next(self._item_ids)}",
            "amount": amount,
            "product": {k: produto[k] for k in ("id", "name", "price", "description", "banner")},
        }
        self.orders[order_id]["items"].append(item)
        return item

    def chamadas(self, metodo: str, caminho: str) -> List[Dict[str, Any]]:
        return [r for r in self.requisicoes if r["method"] == metodo and r["path"] == caminho]

    # ------------------------------------------------------------------ #
    def _criar_app(self) -> FastAPI:
        app = FastAPI()
        backend = self

        @app.middleware("http")
        async def registrar(request: Request, call_next):
            corpo = await request.body()
            backend.requisicoes.append(
                {
                    "method": request.method,
                    "path": request.url.path,
                    "query": dict(request.query_params),
                    "headers": dict(request.headers),
                    "body": corpo,
                }
            )
            forcada = backend._forcadas.get((request.method, request.url.path))
            if forcada is not None:
                status_code, conteudo = forcada
                if conteudo is None:
                    return Response(status_code=status_code)
                if isinstance(conteudo, str):
                    return PlainTextResponse(conteudo, status_code=status_code)
                return JSONResponse(conteudo, status_code=status_code)
            return await call_next(request)

        def _pedido_ou_404(order_id: Optional[str]):
            pedido = backend.orders.get(order_id or "")
            if pedido is None:
                return None, JSONResponse({"error": "Pedido não encontrado"}, status_code=404)
            return pedido, None

        # utilitários do cliente HTTP
        @app.post("/echo")
        async def echo(request: Request):
            return await request.json()

        @app.get("/texto")
        async def texto():
            return PlainTextResponse("isto não é json")

        @app.get("/vazio")
        async def vazio():
            return Response(status_code=200)

        @app.get("/cabecalhos")
        async def cabecalhos(request: Request):
            return dict(request.headers)

        # auth
        @app.post("/api/auth/session")
        async def sessao(request: Request):
            dados = await request.json()
            if dados.get("password") != "segredo":
                return JSONResponse({"error": "Credenciais inválidas"}, status_code=401)
            return {"id": 1, "name": "Ana", "email": dados["email"], "role": 1, "token": TOKEN}

        @app.post("/api/auth/users", status_code=201)
        async def criar_usuario(request: Request):
            dados = await request.json()
            if "@" not in dados.get("email", ""):
                return JSONResponse({"error": "Email inválido"}, status_code=400)
            return {"id": 2, "name": dados["name"], "email": dados["email"], "role": "staff"}

        @app.get("/api/auth/me")
        async def me(request: Request):
            token = request.headers.get("authorization", "").replace("Bearer ", "")
            usuario = backend.users.get(token)
            if usuario is None:
                return JSONResponse({"error": "Token inválido"}, status_code=401)
            return usuario

        # pedidos
        @app.get("/api/orders")
        async def listar_pedidos(draft: Optional[str] = None):
            pedidos = list(backend.orders.values())
            if draft is not None:
                alvo = draft == "true"
                pedidos = [p for p in pedidos if p["draft"] == alvo]
            return pedidos

        @app.post("/api/order", status_code=201)
        async def criar_pedido(request: Request):
            dados = await request.json()
            dados.pop("items", None)
            pedido = backend.adicionar_pedido(**dados)
            return {"id": pedido["id"]}

        @app.get("/api/order/detail")
        async def detalhe(order_id: str):
            pedido, erro = _pedido_ou_404(order_id)
            return erro or pedido

        @app.put("/api/order/viewed")
        async def visualizado(request: Request):
            pedido, erro = _pedido_ou_404((await request.json()).get("order_id"))
            if erro:
                return erro
            pedido["viewed"] = True
            return pedido

        @app.put("/api/order/send")
        async def enviar(request: Request):
            dados = await request.json()
            pedido, erro = _pedido_ou_404(dados.get("order_id"))
            if erro:
                return erro
            pedido["draft"] = False
            if dados.get("name"):
                pedido["name"] = dados["name"]
            return pedido

        @app.put("/api/order/finish")
        async def finalizar(request: Request):
            pedido, erro = _pedido_ou_404((await request.json()).get("order_id"))
            if erro:
                return erro
            pedido["status"] = True
            return pedido

        @app.put("/api/order/update")
        async def atualizar(request: Request):
            dados = await request.json()
            pedido, erro = _pedido_ou_404(dados.get("order_id"))
            if erro:
                return erro
            pedido["comanda"] = dados.get("comanda")
            return pedido

        @app.post("/api/order/add")
        async def adicionar(request: Request):
            dados = await request.json()
            pedido, erro = _pedido_ou_404(dados.get("order_id"))
            if erro:
                return erro
            return backend.adicionar_item(pedido["id"], dados["product_id"], dados["amount"])

        @app.delete("/api/order")
        async def deletar(order_id: str):
            if backend.orders.pop(order_id, None) is None:
                return JSONResponse({"error": "Pedido não encontrado"}, status_code=404)
            return {"ok": True}

        @app.post("/api/order/receive-partial")
        async def receber_parcial(request: Request):
            backend.recebimentos.append({"parcial": True, **(await request.json())})
            return {"ok": True}

        # caixa
        @app.get("/api/caixa/status")
        async def status_caixa():
            if backend.caixa_status is None:
                return JSONResponse({"error": "Not found"}, status_code=404)
            return backend.caixa_status

        @app.post("/api/caixa/open")
        async def abrir_caixa(request: Request):
            dados = await request.json()
            backend.caixa_status = {
                "isOpen": True,
                "initialAmount": dados["initialAmount"],
                "currentAmount": dados["initialAmount"],
                "totalSales": 0,
                "totalOrders": 0,
            }
            return backend.caixa_status

        @app.post("/api/caixa/close")
        async def fechar_caixa():
            if backend.caixa_status:
                backend.caixa_status["isOpen"] = False
            return {"ok": True}

        @app.post("/api/caixa/receive")
        async def receber(request: Request):
            backend.recebimentos.append({"parcial": False, **(await request.json())})
            return {"ok": True}

        @app.get("/api/caixa/sales")
        async def vendas(date: str):
            return {"data": [{"id": "v1", "order_id": "o1", "amount": 5300, "payment_method": "PIX",
                              "createdAt": f"{date}T20:00:00Z"}]}

        @app.get("/api/caixa/sales/{venda_id}")
        async def venda(venda_id: str):
            if venda_id != "v1":
                return JSONResponse({"error": "Venda não encontrada"}, status_code=404)
            return {"id": "v1", "order_id": "o1", "amount": 5300, "payment_method": "PIX"}

        # catálogo
        @app.get("/api/category")
        async def categorias():
            return backend.categories

        @app.post("/api/category")
        async def criar_categoria(request: Request):
            dados = await request.json()
            categoria = {"id": f"c{len(backend.categories) + 1}", "name": dados["name"]}
            backend.categories.append(categoria)
            return categoria

        @app.get("/api/products")
        async def produtos(disabled: Optional[str] = None):
            if disabled is None:
                return backend.products
            return [p for p in backend.products if p["disabled"] == (disabled == "true")]

        @app.post("/api/product")
        async def criar_produto(request: Request):
            dados = await request.json()
            if not any(c["id"] == dados.get("category") for c in backend.categories):
                return JSONResponse({"error": "Categoria não encontrada"}, status_code=400)
            produto = {"id": f"p{len(backend.products) + 1}", "name": dados["name"],
                       "price": int(dados["price"]), "description": dados.get("description", ""),
                       "banner": None, "disabled": False, "category_id": dados["category"]}
            backend.products.append(produto)
            return produto

        @app.put("/api/product")
        async def atualizar_produto(request: Request):
            dados = await request.json()
            produto = next((p for p in backend.products if p["id"] == dados.get("product_id")), None)
            if produto is None:
                return JSONResponse({"error": "Produto não encontrado"}, status_code=404)
            produto["name"] = dados["name"]
            return produto

        @app.delete("/api/product")
        async def deletar_produto(product_id: Optional[str] = None):
            backend.products = [p for p in backend.products if p["id"] != product_id]
            return {"ok": True}

        @app.delete("/api/product/{product_id}")
        async def deletar_produto_path(product_id: str):
            backend.products = [p for p in backend.products if p["id"] != product_id]
            return {"ok": True}

        # público
        @app.get("/public/category")
        async def categorias_publicas():
            return backend.categories

        @app.get("/public/products")
        async def produtos_publicos(disabled: Optional[str] = None):
            return [p for p in backend.products if not p["disabled"]]

        @app.get("/public/orders")
        async def pedidos_mesa(table: int, draft: Optional[str] = None):
            pedidos = [p for p in backend.orders.values() if p["table"] == table]
            if draft is not None:
                pedidos = [p for p in pedidos if p["draft"] == (draft == "true")]
            return pedidos

        @app.post("/public/order", status_code=201)
        async def criar_pedido_publico(request: Request):
            dados = await request.json()
            itens = dados.pop("items", [])
            if dados.get("name") is not None or itens:
                dados.setdefault("draft", False)
            pedido = backend.adicionar_pedido(**dados)
            for item in itens:
                backend.adicionar_item(pedido["id"], item["product_id"], item["amount"])
            return {"id": pedido["id"]}

        @app.get("/public/order/detail")
        async def detalhe_publico(order_id: str):
            pedido, erro = _pedido_ou_404(order_id)
            return erro or pedido

        @app.post("/public/order/add")
        async def adicionar_publico(request: Request):
            dados = await request.json()
            pedido, erro = _pedido_ou_404(dados.get("order_id"))
            if erro:
                return erro
            return backend.adicionar_item(pedido["id"], dados["product_id"], dados["amount"])

        @app.delete("/public/order/remove")
        async def remover_publico(item_id: str):
            for pedido in backend.orders.values():
                pedido["items"] = [i for i in pedido["items"] if i["id"] != item_id]
            return {"ok": True}

        @app.put("/public/order/send")
        async def enviar_publico(request: Request):
            dados = await request.json()
            pedido, erro = _pedido_ou_404(dados.get("order_id"))
            if erro:
                return erro
            pedido["draft"] = False
            pedido["name"] = dados.get("name")
            return pedido

        # relatórios
        @app.get("/api/analytics/metrics")
        async def metricas(date: Optional[str] = None):
            return {"data": {"day_date": f"{date}T00:00:00", "total_cents": "12000", "orders": 4,
                             "payment_methods": {"Dinheiro": 2000, "pix": "4000", "Credit Card": 6000}}}

        @app.get("/api/analytics/daily-sales")
        async def vendas_diarias(start: str, end: str):
            return {"items": [
                {"date": end, "totalSales": 9000, "totalOrders": 3},
                {"dayDate": start, "total": 3000, "orders": 1, "paymentMethods": {"DEBITO": 3000}},
                {"sem_data": True},
            ]}

        return app


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def settings():
    return carregar_settings({"API_URL": BACKEND_URL})


@pytest.fixture
def ctx(backend, settings):
    return AppContext(settings, transport=httpx.ASGITransport(app=backend.app))
