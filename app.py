# app.py
from carwash.main import app as app  # uvicorn "app:app" hedefi

if __name__ == "__main__":
    import uvicorn
    # Yerel geliştirme: ön yüz http://localhost:8080 üzerinden /api'ye bağlanır
    uvicorn.run("app:app", host="127.0.0.1", port=3001, reload=True)
