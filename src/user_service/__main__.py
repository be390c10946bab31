from user_service.main import run

run()
