import uvicorn

def start():
    """Função para iniciar o servidor Uvicorn"""
    from pagarme_bridge.app.main import app  # ✅ Importação dentro da função evita import circular
    uvicorn.run(app, host="0.0.0.0", port=8000)

if __name__ == "__main__":
    start()
