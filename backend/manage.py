"""
Управление проектом - CLI команды.

Использование:
    python manage.py check-db
    python manage.py reset-db
    python manage.py seed-db
    python manage.py create-tables
    python manage.py runserver
"""

import argparse
from datetime import timedelta

from meetups.core.database import Base, engine, SessionLocal
from meetups.core.models import User, Meetup, RSVP, utcnow
from meetups.core.security import hash_password
from meetups import config


def check_db():
    """Проверка базы данных - показать пользователей, митапы и RSVP"""
    db = SessionLocal()

    try:
        users = db.query(User).all()

        print(f"\n📊 Всего пользователей в БД: {len(users)}\n")
        print("=" * 60)

        if not users:
            print("⚠️  База данных пустая.")
            print("   Зарегистрируйте пользователя через /rpc/registerUser\n")
            return

        for user in users:
            print(f"ID: {user.id}")
            print(f"Email: {user.email}")
            print(f"Имя: {user.name}")
            print(f"Пароль (хеш): {user.password_hash[:60]}...")
            print(f"Создан: {user.created_at}")
            print("-" * 60)

        meetups = db.query(Meetup).order_by(Meetup.date).all()
        print(f"\n📅 Всего митапов: {len(meetups)}\n")
        for meetup in meetups:
            rsvp_count = db.query(RSVP).filter(RSVP.meetup_id == meetup.id).count()
            print(f"[{meetup.id}] {meetup.date:%Y-%m-%d} {meetup.time} | {meetup.title} "
                  f"| {meetup.location} | организатор {meetup.organizer_id} | RSVP: {rsvp_count}")

    finally:
        db.close()


def reset_db():
    """Сброс базы данных (удалить все таблицы и создать заново)"""
    print("⚠️  ВНИМАНИЕ: Это удалит все данные из БД!")
    confirm = input("Продолжить? (yes/no): ")

    if confirm.lower() != "yes":
        print("❌ Отменено")
        return

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("✅ База данных сброшена\n")


def seed_db():
    """Заполнить БД тестовыми пользователями и митапом"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    test_users = [
        {"email": "ann@test.com", "name": "Ann", "password": "secret1"},
        {"email": "bob@test.com", "name": "Bob", "password": "secret2"},
    ]

    try:
        created = []
        for user_data in test_users:
            # Проверяем что пользователь ещё не существует
            existing = db.query(User).filter(User.email == user_data["email"]).first()
            if existing:
                print(f"⚠️  Пользователь {user_data['email']} уже существует")
                created.append(existing)
                continue

            user = User(
                email=user_data["email"],
                name=user_data["name"],
                password_hash=hash_password(user_data["password"])
            )
            db.add(user)
            created.append(user)
            print(f"✅ Создан пользователь: {user_data['email']}")

        db.flush()

        organizer, attendee = created
        if not db.query(Meetup).filter(Meetup.organizer_id == organizer.id).first():
            meetup = Meetup(
                title="Python evening",
                description="Lightning talks and pizza",
                date=(utcnow() + timedelta(days=7)).replace(hour=0, minute=0, second=0, microsecond=0),
                time="18:30",
                location="Main library, room 3",
                organizer_id=organizer.id,
            )
            db.add(meetup)
            db.flush()
            db.add(RSVP(user_id=attendee.id, meetup_id=meetup.id))
            print(f"✅ Создан митап: {meetup.title}")

        db.commit()
    finally:
        db.close()
    print("\n✅ Тестовые данные добавлены\n")


def create_tables():
    """Создать таблицы в БД (если их нет)"""
    Base.metadata.create_all(bind=engine)
    print("✅ Таблицы созданы\n")


def runserver():
    """Запустить API через uvicorn"""
    import uvicorn

    uvicorn.run("meetups.main:app", host=config.API_HOST, port=config.API_PORT)


def main():
    """Главная функция - обработка команд"""
    parser = argparse.ArgumentParser(
        description="Управление проектом Community Meetups API"
    )

    parser.add_argument(
        "command",
        choices=["check-db", "reset-db", "seed-db", "create-tables", "runserver"],
        help="Команда для выполнения"
    )

    args = parser.parse_args()

    # Выполнение команды
    commands = {
        "check-db": check_db,
        "reset-db": reset_db,
        "seed-db": seed_db,
        "create-tables": create_tables,
        "runserver": runserver,
    }

    commands[args.command]()


if __name__ == "__main__":
    main()
